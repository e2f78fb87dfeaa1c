[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "foyle"
version = "0.1.0"
description = "Core types, block post-processing and streaming helpers for an AI assistant that suggests commands in markdown notebooks"
requires-python = ">=3.10"
dependencies = []
keywords = ["notebook", "assistant", "llm", "markdown", "completion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
foyle = "foyle.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["foyle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
