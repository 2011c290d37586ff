import pytest

from finnlang.errors import RuntimeFailure
from finnlang.interpreter import run_program


def test_printing_arrays():
    assert run_program('print([1, 2, 3]);') == '[1, 2, 3]'
    assert run_program('print([]);') == '[]'
    assert run_program('print([[1, 2], [3]]);') == '[[1, 2], [3]]'
    assert run_program('print([1, "a", true, 1.50]);') == '[1, a, true, 1.5]'


def test_index_read():
    assert run_program('let a = [10, 20, 30]; print(a[1]); print(a[1 + 1]);') == '20\n30'
    assert run_program('let g = [[1, 2], [3, 4]]; print(g[1][0]);') == '3'


def test_index_assignment():
    assert run_program('let a = [1, 2, 3]; a[0] = 9; print(a);') == '[9, 2, 3]'


def test_nested_index_assignment():
    source = 'let g = [[1, 2], [3, 4]]; g[1][0] = 9; print(g);'
    assert run_program(source) == '[[1, 2], [9, 4]]'


def test_assignment_copies_arrays():
    source = 'let a = [1, 2]; let b = a; b[0] = 9; print(a); print(b);'
    assert run_program(source) == '[1, 2]\n[9, 2]'


def test_arguments_are_copies():
    source = '''
    funct setFirst(arr: int) { arr[0] = 100; print(arr); }
    let a = [1, 2];
    setFirst(a);
    print(a);
    '''
    assert run_program(source) == '[100, 2]\n[1, 2]'


def test_returned_array_is_a_value():
    source = '''
    funct pair(x: int): int { return [x, x * 2]; }
    let p = pair(4);
    print(p[1]);
    print(pair(1) == [1, 2]);
    '''
    assert run_program(source) == '8\ntrue'


def test_array_equality_is_structural():
    assert run_program('print([1, [2]] == [1, [2]]);') == 'true'
    assert run_program('print([1, 2] == [1, 2, 3]);') == 'false'
    assert run_program('print([1] != [1.0]);') == 'true'


def test_array_concatenates_with_strings():
    assert run_program('print("xs: " + [1, 2]);') == 'xs: [1, 2]'


@pytest.mark.parametrize('source, message', [
    ('let a = [1, 2]; print(a[2]);', 'Index out of bounds: index 2, length 2'),
    ('let a = [1, 2]; print(a[-1]);', 'Index out of bounds: index -1, length 2'),
    ('let a = []; a[0] = 1;', 'Index out of bounds: index 0, length 0'),
    ('let g = [[1]]; g[0][3] = 1;', 'Index out of bounds: index 3, length 1'),
    ('let x = 5; print(x[0]);', 'Invalid indexing operation: cannot index int with int'),
    ('let a = [1]; print(a[true]);', 'Invalid indexing operation: cannot index array with bool'),
    ('let a = [1]; print(a[0.0]);', 'Invalid indexing operation'),
    ('let s = "abc"; s[0] = "x";', 'Invalid indexing operation: cannot index string with int'),
    ('f()[0] = 1;', 'Invalid array assignment: target must be a variable'),
    ('print(a[0]);', 'Undefined variable: a'),
])
def test_array_failures(source, message):
    with pytest.raises(RuntimeFailure) as excinfo:
        run_program(source)
    assert message in str(excinfo.value)


def test_arrays_do_not_support_arithmetic():
    with pytest.raises(RuntimeFailure, match='Unsupported operand types for \\*'):
        run_program('print([1] * 2);')


def test_out_of_bounds_write_fails():
    with pytest.raises(RuntimeFailure, match='Index out of bounds: index 5, length 3'):
        run_program('let arr = [1, 2, 3]; arr[5] = 1;')
