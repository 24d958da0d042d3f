[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockdays"
version = "0.1.0"
description = "Small TCP client and server programs: blocking echo, hello, calculator, file transfer and a concurrent echo server"
requires-python = ">=3.10"
dependencies = []
keywords = ["socket", "tcp", "echo", "client", "server", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sockdays-block-echo-server = "sockdays.block_echo:server_main"
sockdays-block-echo-client = "sockdays.block_echo:client_main"
sockdays-hello-server = "sockdays.hello:server_main"
sockdays-hello-client = "sockdays.hello:client_main"
sockdays-op-server = "sockdays.opcalc:server_main"
sockdays-op-client = "sockdays.opcalc:client_main"
sockdays-file-server = "sockdays.filetransfer:server_main"
sockdays-file-client = "sockdays.filetransfer:client_main"
sockdays-echo-server = "sockdays.echo:server_main"
sockdays-echo-client = "sockdays.echo:client_main"

[tool.hatch.build.targets.wheel]
packages = ["sockdays"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
