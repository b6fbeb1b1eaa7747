# aspas/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .common import *
from .auth import *
from .project import *
from .task import *
from .phrase import *
