[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "payproc"
version = "0.1.0"
description = "A small line-based TCP payment processing server with graceful shutdown"
requires-python = ">=3.10"
dependencies = []
keywords = ["payment", "tcp", "server", "point-of-sale", "graceful-shutdown"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
payproc = "payproc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["payproc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
