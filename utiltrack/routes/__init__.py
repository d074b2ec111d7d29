from .consultants import consultants_bp
from .projects import projects_bp
from .utilization import utilization_bp
from .mass_load import mass_load_bp
from .pto_requests import pto_requests_bp
from .utils import utils_bp

__all__ = [
    'consultants_bp', 'projects_bp', 'utilization_bp',
    'mass_load_bp', 'pto_requests_bp', 'utils_bp'
]
