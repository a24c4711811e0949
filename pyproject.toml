[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "forumdb"
version = "0.1.0"
description = "Data access layer for a small discussion forum: users, posts, comments, votes and tags on MySQL or SQLite"
requires-python = ">=3.10"
keywords = ["forum", "mysql", "sqlite", "message board", "data access"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
]
dependencies = [
    "pymysql",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["forumdb"]

[tool.pytest.ini_options]
addopts = "-ra"
