[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "honestforest"
version = "0.1.0"
description = "Prediction core for generalized random forests: regression, quantile and instrumental strategies with grouped variance estimates"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["random forest", "causal inference", "quantile regression", "instrumental variables", "statistics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["honestforest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
