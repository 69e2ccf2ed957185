# Import all models so SQLAlchemy can resolve them
from thetawatch.models.conjunction import Conjunction as Conjunction
