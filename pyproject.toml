[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "distsims"
version = "0.1.0"
description = "Simulation of Lamport's distributed mutual exclusion algorithm with logical clocks"
requires-python = ">=3.11"
dependencies = []
keywords = ["distributed systems", "lamport clock", "mutual exclusion", "simulation", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Framework :: AsyncIO",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
distributed-mutex = "distsims.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["distsims"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
