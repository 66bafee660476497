from functools import lru_cache


@lru_cache(maxsize=1)
def _prep_limma():
    """Lazily prepare the limma runtime.

    Returns:
        Tuple[Any, Any]: ``(r_env, limma_pkg)``.
    """
    from bioc2ri.lazy_r_env import get_r_environment
    r = get_r_environment()
    limma_pkg = r.lazy_import_r_packages("limma")
    return r, limma_pkg
