"""Boolean engines for closed shapes."""

from . import native as native

__all__ = ['native']

ENGINE_REGISTRY = {'native': native}


def get_engine(name: str):
    return ENGINE_REGISTRY.get(name)


def union(shapes, engine: str = 'native'):
    """Union ``shapes`` with the named engine."""
    eng = get_engine(engine)
    if eng is None:
        from patterncad.errors import unknown_name
        raise unknown_name('boolean engine', engine, sorted(ENGINE_REGISTRY))
    return eng.union(shapes)


__all__.extend(['ENGINE_REGISTRY', 'get_engine', 'union'])
