# Import Base class and all models so create_all / Alembic can detect them
from thetawatch.db.base_class import Base  # noqa
from thetawatch.models.conjunction import Conjunction  # noqa
