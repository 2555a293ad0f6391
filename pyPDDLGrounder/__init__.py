__version__ = '0.1.0'

from pyPDDLGrounder.core.compiler.model import Inertia, PDDLDomainTables, PredicateTable
from pyPDDLGrounder.core.expr import Connective, Expression, as_variable
from pyPDDLGrounder.core.grounder import PDDLGrounder
from pyPDDLGrounder.core.operator import ActionSchema, MethodSchema
