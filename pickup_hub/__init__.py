"""Orders and pick-up points for a parcel pick-up point: JSON file storage, services, a WSGI API and console tools."""

__version__ = "0.1.0"