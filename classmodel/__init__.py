"""classmodel：单继承的类、实例、super 调用和祖先检查

    Animal = create_class(name='Animal')

    @Animal.instance_method
    def init(self, name):
        self.name = name

    Cat = create_class(Animal, name='Cat')

    @Cat.instance_method
    def init(self, name, breed):
        self.super.init(name)
        self.breed = breed

    my_cat = Cat.new('mio', 'tabby')
    instance_of(my_cat, Animal) # True
"""

from classmodel.errors import (
    ClassModelError, InvalidArgumentError, InvalidSuperUsageError,
    MethodNotFoundError, ReservedNameError,
)
from classmodel.model import (
    CLASS, INSTANCE, MISSING, OBJECT, Class, Instance, SuperProxy,
    callmethod, create_class, dispatch, instance_of, read_attr, unwrap,
    write_attr,
)

# 指定能被其它模块引用的函数、类等
__all__ = [
    'CLASS', 'INSTANCE', 'MISSING', 'OBJECT',
    'Class', 'Instance', 'SuperProxy',
    'callmethod', 'create_class', 'dispatch', 'instance_of', 'read_attr',
    'unwrap', 'write_attr',
    'ClassModelError', 'InvalidArgumentError', 'InvalidSuperUsageError',
    'MethodNotFoundError', 'ReservedNameError',
]
