'''
测试工具类，为所有测试类的父类，存放一些测试公共方法
'''

from contextlib import contextmanager
import io
import logging
import unittest

from classmodel import create_class

@contextmanager
def capture_logging():
    """捕获 classmodel 的日志，用 `in` 检查消息"""
    logger = logging.getLogger('classmodel')
    level = logger.level
    logger.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(io.StringIO())
    logger.addHandler(handler)

    class Messages:
        def __contains__(self, item):
            return item in handler.stream.getvalue()

        def __repr__(self):
            return repr(handler.stream.getvalue())

    try:
        yield Messages()
    finally:
        logger.removeHandler(handler)
        logger.setLevel(level)

class ModelTestCase(unittest.TestCase):

    def setUp(self):
        '''所有测试执行前创建 Animal <- Cat <- Kitten 的类层次'''
        self.Animal = create_class(name='Animal')
        self.Cat = create_class(self.Animal, name='Cat')
        self.Kitten = create_class(self.Cat, name='Kitten')

        def animal_init(self, name):
            self.name = name

        def cat_init(self, name, breed):
            self.super.init(name)
            self.breed = breed

        self.Animal.define_instance_method('init', animal_init)
        self.Cat.define_instance_method('init', cat_init)
