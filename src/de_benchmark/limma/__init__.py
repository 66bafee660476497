"""limma: voom-weighted linear models for RNA-seq counts.

Functional API:
    >>> import de_benchmark.limma as limma
    >>> se_voom = limma.voom(se, design)
    >>> model = limma.lm_fit(se_voom, design)
    >>> results = model.e_bayes().top_table()
"""

# Check/install limma (and edgeR for filtering) on module import
from ..r_utils import ensure_r_dependencies, METHOD_R_PACKAGES
ensure_r_dependencies(METHOD_R_PACKAGES["limma"])

from .voom import voom, effective_lib_sizes
from .lm_fit import lm_fit, LimmaModel
from .e_bayes import e_bayes
from .top_table import top_table
from .utils import _prep_limma

__all__ = [
    "voom",
    "effective_lib_sizes",
    "lm_fit",
    "e_bayes",
    "top_table",
    "LimmaModel",
    "_prep_limma",
]
