[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pickup_hub"
version = "0.1.0"
description = "Order and pick-up point management for a parcel pick-up point: JSON file storage, services, a WSGI API and console tools"
requires-python = ">=3.10"
keywords = ["orders", "pick-up point", "parcel", "logistics", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]
dependencies = [
    "werkzeug",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pickup-hub = "pickup_hub.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pickup_hub"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
