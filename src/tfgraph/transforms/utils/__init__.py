from ._utils import get_epsilon as get_epsilon
