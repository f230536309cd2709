"""Client runtime and generator support for the Prisma query engine."""

__version__ = "0.1.0"