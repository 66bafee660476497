"""DESeq2: shrinkage-based negative-binomial GLM.

Functional API:
    >>> import de_benchmark.deseq2 as deseq2
    >>> model = deseq2.deseq(deseq2.deseq_dataset(se, group))
    >>> res = deseq2.results(model)
    >>> shrunk = deseq2.lfc_shrink(model)
"""

# Check/install DESeq2 R package on module import
from ..r_utils import ensure_r_dependencies, METHOD_R_PACKAGES
ensure_r_dependencies(METHOD_R_PACKAGES["deseq2"])

from .deseq_dataset import deseq_dataset, deseq, DESeq2Model
from .results import results, lfc_shrink
from .utils import _prep_deseq2

__all__ = [
    "deseq_dataset",
    "deseq",
    "results",
    "lfc_shrink",
    "DESeq2Model",
    "_prep_deseq2",
]
