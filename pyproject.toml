[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gdfmm"
version = "0.1.0"
description = "Log-scale combinatorics, C numbers, cluster-count priors and Gibbs sampler building blocks for group-dependent finite mixture models"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "bayesian",
    "mixture models",
    "gibbs sampler",
    "species sampling",
    "C numbers",
    "clustering",
]
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
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gdfmm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
