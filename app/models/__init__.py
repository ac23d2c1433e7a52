# Spot webhook receiver — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.spot_job import SpotJob   # noqa
