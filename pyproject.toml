[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "atspnet"
version = "0.1.0"
description = "Approximate traveling-salesman tours of planar points built from a hierarchy of nets"
requires-python = ">=3.10"
keywords = ["traveling salesman", "tsp", "nets", "geometry", "graph"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
atspnet = "atspnet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["atspnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
