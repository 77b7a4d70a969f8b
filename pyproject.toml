[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudpeek"
version = "0.1.0"
description = "Read-only helpers for browsing Google Cloud resources: Compute Engine, Cloud Storage, GKE, IAM, networking, Firestore and a billing overview."
requires-python = ">=3.10"
keywords = ["gcp", "google-cloud", "compute-engine", "gke", "cloud-storage", "iam", "firestore", "billing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cloudpeek"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
