import numpy as np


def get_epsilon(dtype: np.dtype) -> float:
    """Helper for grabbing type-specific precision constants.

    Args:
        dtype: Datatype.

    Returns:
        Output float.
    """
    if dtype == np.float32:
        return 1e-5
    elif dtype == np.float64:
        return 1e-10
    else:
        assert False, f"Unsupported dtype: {dtype}"
