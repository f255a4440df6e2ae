__version__ = "0.3.0"
__description__ = "uiapi : schema driven generic CRUD api for Flask-SQLAlchemy models"
