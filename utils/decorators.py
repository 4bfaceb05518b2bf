import functools


def singleton(cls):
    """
    A decorator that makes every call to the decorated class return one shared instance.

    Arguments passed after the first construction are ignored. The cached
    instance can be dropped with `<Class>.reset_instance()`, which tests use to
    start from a clean object.

    Usage:
        @singleton
        class MyClass:
            pass
    """
    instances = {}

    @functools.wraps(cls, updated=())
    def get_instance(*args, **kwargs):
        if cls not in instances:
            instances[cls] = cls(*args, **kwargs)
        return instances[cls]

    def reset_instance():
        instances.pop(cls, None)

    get_instance.reset_instance = reset_instance
    return get_instance
