from .config import RunConfig
from .convenience import create_generators, create_mock_generators, create_service
from .service import WorkflowService
