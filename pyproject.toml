[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "framelink"
version = "0.1.0"
description = "File transfer over a sliding-window data link layer with a lossy simulated physical layer"
requires-python = ">=3.10"
dependencies = []
keywords = ["file transfer", "data link", "sliding window", "selective repeat", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
framelink-client = "framelink.client:main"
framelink-server = "framelink.server:main"

[tool.hatch.build.targets.wheel]
packages = ["framelink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
