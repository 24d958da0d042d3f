"""Small TCP client and server programs: blocking echo, hello, calculator, file transfer and concurrent echo."""

__version__ = "0.1.0"