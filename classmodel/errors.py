"""类模型运行时的错误类型"""

class ClassModelError(Exception):
    """类模型所有错误的基类"""
    pass

class ReservedNameError(ClassModelError, ValueError):
    """定义方法时使用了保留的名称"""
    pass

class MethodNotFoundError(ClassModelError, AttributeError):
    """沿着祖先链都找不到对应的方法（或字段）"""
    pass

class InvalidSuperUsageError(ClassModelError, RuntimeError):
    """越过根类访问 super，或在实例方法之外使用 super"""
    pass

class InvalidArgumentError(ClassModelError, TypeError):
    """需要类的地方传入了别的值"""
    pass
