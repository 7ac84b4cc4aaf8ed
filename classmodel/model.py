"""一个带单继承的类模型：类、实例、super 代理和祖先检查

和 Smalltalk 风格的对象模型一样，类和实例都只是普通的字典加上
一个指向类的引用，只是方法不再放在类的字段里，而是放在两张显式的
方法表中：实例方法表和类方法表。方法的查找由纯函数 `dispatch`
沿着祖先链完成。
"""

import itertools
import logging
import types

from classmodel.errors import (
    InvalidArgumentError, InvalidSuperUsageError, MethodNotFoundError,
    ReservedNameError,
)

LOGGER = logging.getLogger(__name__)

MISSING = object()

# 分派类型
INSTANCE = 'instance'
CLASS = 'class'

# 内部钩子的名称，用户不能定义
ALLOC_HOOK = 'new' # 分配实例
TRIGGER_HOOK = '__call__' # 触发构造，即 Cat(...)
RESERVED_NAMES = frozenset([ALLOC_HOOK, TRIGGER_HOOK])

# 构造函数，沿着祖先链查找
INIT_HOOK = 'init'

# 实例上指向类和 super 链的只读引用
CLASS_FIELD = 'cls'
SUPER_FIELD = 'super'
STRUCTURAL_NAMES = frozenset([CLASS_FIELD, SUPER_FIELD])


def dispatch(cls, methname, kind, level=0):
    """沿着 `cls` 的祖先链查找 `methname`，从第 `level` 层开始

    第 0 层是 `cls` 自己，第 1 层是它的父类，依此类推直到根类。
    `kind` 决定查找实例方法表（INSTANCE）还是类方法表（CLASS）。
    返回 (方法, 找到方法的层)，找不到时返回 (MISSING, None)。
    """
    if kind not in (INSTANCE, CLASS):
        raise InvalidArgumentError('unknown dispatch kind: %r' % (kind,))
    ancestors = cls._ancestors
    for found in range(level, len(ancestors)):
        methods = ancestors[found]._methods[kind]
        if methname in methods:
            return methods[methname], found
    return MISSING, None


class Class(object):
    """一个用户定义的类"""

    __slots__ = ('_name', '_superclass', '_ancestors', '_methods')

    ids = itertools.count()

    def __init__(self, name, superclass):
        if superclass is not None and not isinstance(superclass, Class):
            raise InvalidArgumentError(
                'superclass must be a class, got %r' % (superclass,))
        self._name = name or 'Class%d' % next(self.ids)
        self._superclass = superclass
        # 父类不会改变，祖先链在创建时算好：自己在第 0 层，根类在最后
        if superclass is None:
            self._ancestors = (self,)
        else:
            self._ancestors = (self,) + superclass._ancestors
        # 两张方法表，键是方法名
        self._methods = {INSTANCE: {}, CLASS: {}}

    def __repr__(self):
        return '<class %s>' % self._name

    @property
    def name(self):
        return self._name

    @property
    def superclass(self):
        """父类，根类的父类是 None"""
        return self._superclass

    @property
    def instance_methods(self):
        return types.MappingProxyType(self._methods[INSTANCE])

    @property
    def class_methods(self):
        return types.MappingProxyType(self._methods[CLASS])

    def method_resolution_order(self):
        """从这个类到根类的祖先列表"""
        return list(self._ancestors)

    def issubclass(self, cls):
        # 按身份比较，Class 没有定义 __eq__
        return cls in self._ancestors

    # 定义方法

    def define_instance_method(self, name, fn):
        """在实例方法表中定义 `name`"""
        self._define(INSTANCE, name, fn)

    def define_class_method(self, name, fn):
        """在类方法表中定义 `name`"""
        self._define(CLASS, name, fn)

    def instance_method(self, fn):
        """装饰器形式的 define_instance_method，使用函数名作为方法名"""
        self.define_instance_method(fn.__name__, fn)
        return fn

    def class_method(self, fn):
        """装饰器形式的 define_class_method"""
        self.define_class_method(fn.__name__, fn)
        return fn

    def _define(self, kind, name, fn):
        if not isinstance(name, str):
            raise InvalidArgumentError(
                'method name must be a string, got %r' % (name,))
        if name in RESERVED_NAMES or name in STRUCTURAL_NAMES:
            raise ReservedNameError('%r is a reserved name' % name)
        # 与运行时自身属性同名的方法永远无法通过点号访问到
        if kind == INSTANCE:
            owners = (Instance, SuperProxy)
        else:
            owners = (Class,)
        if any(name in dir(owner) for owner in owners):
            raise ReservedNameError(
                '%r would be shadowed by the runtime and cannot be a %s method'
                % (name, kind))
        if not callable(fn):
            raise InvalidArgumentError('%r is not callable' % (fn,))

        methods = self._methods[kind]
        if name in methods:
            LOGGER.debug('%s: redefining %s method %r', self._name, kind, name)
        methods[name] = fn
        LOGGER.debug('%s: defined %s method %r', self._name, kind, name)

    # 分配和调用

    def new(self, *args, **kwargs):
        """分配一个实例，并用最近的祖先构造函数初始化它

        构造函数的 self 就是新实例。经由 create_class 创建的类都继承
        OBJECT 的空构造函数；只有直接用 Class(name, None) 建立的另一个
        根类才可能找不到构造函数，这时实例保持空白。
        """
        instance = Instance(self)
        init, level = dispatch(self, INIT_HOOK, INSTANCE)
        if init is MISSING:
            LOGGER.debug('%s: no constructor found, instance left blank',
                self._name)
        else:
            LOGGER.debug('%s: constructing with %s.%s', self._name,
                self._ancestors[level].name, INIT_HOOK)
            # 构造函数失败时异常直接抛给调用者，实例不会返回
            _invoke(init, instance, level, args, kwargs)
        return instance

    __call__ = new

    def callmethod(self, methname, *args, **kwargs):
        """调用类方法 `methname`，不绑定 self"""
        return self._class_method(methname)(*args, **kwargs)

    def _class_method(self, methname):
        meth, _ = dispatch(self, methname, CLASS)
        if meth is MISSING:
            raise MethodNotFoundError(
                'class %s has no class method %r' % (self._name, methname))
        return meth

    def __getattr__(self, name):
        if name in Class.__slots__:
            raise AttributeError(name)
        if name == SUPER_FIELD:
            raise InvalidSuperUsageError(
                'super is only available on instances, not on class %s'
                % self._name)
        return self._class_method(name)


class Base(object):
    """Instance 和 SuperProxy 共同的部分

    字段的读写总是委托给同一个真正的实例；方法从 `_level` 层祖先
    开始查找。实例自己就是第 0 层。
    """

    __slots__ = ('_instance', '_level')

    @property
    def cls(self):
        """实例所属的类"""
        return self._instance._cls

    @property
    def super(self):
        """上一层祖先的代理

        代理的 super 是它的下一层。实例的 super 相对于正在执行的实例
        方法的定义类；没有方法在执行时就是第 1 层。
        """
        instance = self._instance
        level = self._level
        if self is instance and instance._active:
            level = instance._active[-1]
        chain = instance._chain
        if level >= len(chain):
            raise InvalidSuperUsageError(
                'no super beyond the root class %s'
                % instance._cls._ancestors[-1].name)
        return chain[level]

    def __getattr__(self, name):
        if name in _SLOT_NAMES:
            raise AttributeError(name)
        value = read_attr(self, name)
        if value is MISSING:
            raise MethodNotFoundError(
                '%s instance has no field or method %r'
                % (self.cls.name, name))
        return value

    def __setattr__(self, name, value):
        write_attr(self, name, value)

    def __delattr__(self, name):
        _check_field_name(self, name)
        fields = self._instance._fields
        if name not in fields:
            raise MethodNotFoundError(
                '%s instance has no field %r' % (self.cls.name, name))
        del fields[name]


class Instance(Base):
    """用户定义类的实例"""

    __slots__ = ('_cls', '_fields', '_chain', '_active')

    def __init__(self, cls):
        if not isinstance(cls, Class):
            raise InvalidArgumentError('%r is not a class' % (cls,))
        # 这些引用在创建后都不再改变，绕过 Base.__setattr__ 直接写入
        object.__setattr__(self, '_instance', self)
        object.__setattr__(self, '_level', 0)
        object.__setattr__(self, '_cls', cls)
        object.__setattr__(self, '_fields', {})
        # 正在执行的实例方法所在的层，栈顶是最内层的调用
        object.__setattr__(self, '_active', [])
        depth = len(cls._ancestors) - 1
        chain = tuple(SuperProxy(self, level) for level in range(1, depth + 1))
        object.__setattr__(self, '_chain', chain)
        LOGGER.debug('allocated %r with %d super levels', self, depth)

    def __repr__(self):
        return '<%s instance at %#x>' % (self._cls.name, id(self))


class SuperProxy(Base):
    """绑定到某个实例和某一层祖先的代理"""

    __slots__ = ()

    def __init__(self, instance, level):
        object.__setattr__(self, '_instance', instance)
        object.__setattr__(self, '_level', level)

    def __repr__(self):
        ancestor = self._instance._cls._ancestors[self._level]
        return '<super of %r at level %d (%s)>' % (
            self._instance, self._level, ancestor.name)


_SLOT_NAMES = frozenset(Base.__slots__ + Instance.__slots__)


def _invoke(meth, instance, level, args, kwargs):
    """以实例为 self 调用在第 `level` 层找到的方法

    调用期间记住这一层，方法里的 self.super 因此从定义它的类的上一层
    开始，而不是从实例自己的类开始。
    """
    active = instance._active
    active.append(level)
    try:
        return meth(instance, *args, **kwargs)
    finally:
        active.pop()


def _call(obj, meth, level, args, kwargs):
    instance = obj._instance
    if obj is instance:
        return _invoke(meth, instance, level, args, kwargs)
    # 经由 super 代理调用：self 是找到方法那一层的代理，
    # 嵌套的 self.super 继续往上走
    return meth(instance._chain[level - 1], *args, **kwargs)


def _check_field_name(obj, fieldname):
    if fieldname in STRUCTURAL_NAMES or any(
            fieldname in dir(owner) for owner in (Instance, SuperProxy)):
        raise ReservedNameError('%r cannot be assigned on %r' % (fieldname, obj))


def unwrap(obj):
    """返回实例或 super 代理背后真正的实例"""
    if not isinstance(obj, Base):
        raise InvalidArgumentError('%r is not an instance' % (obj,))
    return obj._instance


def read_attr(obj, fieldname):
    """从对象中读取 `fieldname`

    字段优先，然后从对象所在的层开始查找实例方法，找到的方法会绑定
    self。都找不到时返回 MISSING。
    """
    instance = unwrap(obj)
    fields = instance._fields
    if fieldname in fields:
        return fields[fieldname]
    meth, level = dispatch(instance._cls, fieldname, INSTANCE, obj._level)
    if meth is MISSING:
        return MISSING

    def bound_method(*args, **kwargs):
        return _call(obj, meth, level, args, kwargs)
    return bound_method


def write_attr(obj, fieldname, value):
    """将字段 `fieldname` 写入对象背后的实例"""
    _check_field_name(obj, fieldname)
    unwrap(obj)._fields[fieldname] = value


def callmethod(obj, methname, *args, **kwargs):
    """在对象上调用实例方法 `methname`，忽略同名字段"""
    instance = unwrap(obj)
    meth, level = dispatch(instance._cls, methname, INSTANCE, obj._level)
    if meth is MISSING:
        raise MethodNotFoundError(
            '%s instance has no method %r' % (instance._cls.name, methname))
    return _call(obj, meth, level, args, kwargs)


def instance_of(obj, cls):
    """如果对象是 `cls` 或其子类的实例则返回True"""
    if not isinstance(cls, Class):
        raise InvalidArgumentError('%r is not a class' % (cls,))
    if not isinstance(obj, Base):
        return False
    current = obj.cls
    while current is not None:
        if current is cls:
            return True
        current = current.superclass
    return False


def create_class(superclass=None, name=None):
    """创建一个新类，没有给出父类时继承根类 OBJECT"""
    if superclass is None:
        superclass = OBJECT
    elif not isinstance(superclass, Class):
        raise InvalidArgumentError(
            'superclass must be a class, got %r' % (superclass,))
    cls = Class(name, superclass)
    LOGGER.debug('created %r (superclass %r)', cls, superclass)
    return cls


def _root_init(self, *args, **kwargs):
    """根类的构造函数什么都不做"""
    pass

# 根类 OBJECT 在导入时创建一次，它没有父类
OBJECT = Class(name='Object', superclass=None)
OBJECT.define_instance_method(INIT_HOOK, _root_init)
