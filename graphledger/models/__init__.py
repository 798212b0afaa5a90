"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - GraphModel is the aggregate root for versions, requests and simulations

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from graphledger.models.user import User  # noqa: F401
from graphledger.models.graph_model import GraphModel  # noqa: F401
from graphledger.models.graph_version import GraphVersion  # noqa: F401
from graphledger.models.weight_change_request import WeightChangeRequest  # noqa: F401
from graphledger.models.simulation import Simulation  # noqa: F401
from graphledger.models.simulation_result import SimulationResult  # noqa: F401
from graphledger.models.token_transaction import TokenTransaction  # noqa: F401
