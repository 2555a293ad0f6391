'''Shared fixtures.

The standard problem has the types
    0 location = {a, b}, 1 nothing = {}, 2 item = {a, b, c}
with constants a = 0, b = 1, c = 2, and the predicates
    0 (at ?l - location)                  positive inertia, never in the initial state
    1 (clear ?l - location)               fluent, initially clear(a)
    2 (link ?l1 ?l2 - location)           inertia, initially link(a, b) and link(b, a)
    3 (ready)                             negative inertia, initially true
    4 (holding ?i - item)                 negative inertia, initially true of every item
    5 (painted ?i - item)                 inertia, initially painted(a)
and the tasks 0 (deliver ?i - item ?l - location), 1 (goto ?l - location).
'''
import pytest

from pyPDDLGrounder import Inertia, PDDLDomainTables


@pytest.fixture
def tables():
    return PDDLDomainTables.from_initial_state(
        domains={0: [0, 1], 1: [], 2: [0, 1, 2]},
        signatures={0: [0], 1: [0], 2: [0, 0], 3: [], 4: [2], 5: [2]},
        inertia={
            0: Inertia.POSITIVE,
            1: Inertia.FLUENT,
            2: Inertia.INERTIA,
            3: Inertia.NEGATIVE,
            4: Inertia.NEGATIVE,
            5: Inertia.INERTIA
        },
        facts=[
            (1, (0,)),
            (2, (0, 1)), (2, (1, 0)),
            (3, ()),
            (4, (0,)), (4, (1,)), (4, (2,)),
            (5, (0,))
        ],
        type_names=['location', 'nothing', 'item'],
        constant_names=['a', 'b', 'c'],
        predicate_names=['at', 'clear', 'link', 'ready', 'holding', 'painted'],
        task_names=['deliver', 'goto'])
