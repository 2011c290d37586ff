import pytest

from finnlang.errors import RuntimeFailure
from finnlang.interpreter import run_program


def test_recursive_factorial():
    source = '''
    funct fact(n: int): int {
        if (n <= 1) { return 1; }
        return n * fact(n - 1);
    }
    print(fact(5));
    '''
    assert run_program(source) == '120'


def test_output_appears_at_call_site():
    source = 'funct f(): int { print("in f"); return 1; } print("result " + f());'
    assert run_program(source) == 'in f\nresult 1'


def test_interleaved_output_order():
    source = '''
    funct say(s: string) { print(s); }
    print("a");
    say("b");
    print("c");
    say("d");
    '''
    assert run_program(source) == 'a\nb\nc\nd'


def test_missing_return_yields_zero():
    assert run_program('funct f() { print("hi"); } print(f());') == 'hi\n0'
    assert run_program('funct g(): int { return; } print(g());') == '0'


def test_first_return_wins():
    source = '''
    funct pick(n: int): string {
        for (let i = 0; i < 10; i = i + 1) {
            if (i == n) { return "found " + i; }
        }
        return "none";
    }
    print(pick(3));
    print(pick(42));
    '''
    assert run_program(source) == 'found 3\nnone'


def test_arguments_evaluated_left_to_right_in_caller():
    source = '''
    funct trace(s: string): int { print(s); return 1; }
    funct add(a: int, b: int): int { return a + b; }
    print(add(trace("left"), trace("right")));
    '''
    assert run_program(source) == 'left\nright\n2'


def test_function_body_cannot_see_caller_variables():
    source = 'let x = 1; funct f(): int { return x; } print(f());'
    with pytest.raises(RuntimeFailure, match='Undefined variable: x'):
        run_program(source)


def test_locals_do_not_leak_to_caller():
    source = 'funct f() { let inner = 5; } f(); print(inner);'
    with pytest.raises(RuntimeFailure, match='Undefined variable: inner'):
        run_program(source)


def test_parameters_shadow_nothing_in_caller():
    source = 'let n = 1; funct f(n: int): int { n = n + 100; return n; } print(f(n)); print(n);'
    assert run_program(source) == '101\n1'


def test_functions_call_each_other():
    source = '''
    funct isEven(n: int): bool { if (n == 0) { return true; } return isOdd(n - 1); }
    funct isOdd(n: int): bool { if (n == 0) { return false; } return isEven(n - 1); }
    print(isEven(10));
    print(isOdd(7));
    '''
    assert run_program(source) == 'true\ntrue'


def test_call_before_definition_fails():
    with pytest.raises(RuntimeFailure, match='Undefined function: later'):
        run_program('print(later()); funct later(): int { return 1; }')


def test_wrong_argument_count():
    source = 'funct f(a: int, b: int): int { return a; } print(f(1));'
    with pytest.raises(RuntimeFailure, match='Function f expects 2 arguments, got 1'):
        run_program(source)


def test_declared_parameter_types_are_not_enforced():
    assert run_program('funct echo(v: int) { print(v); } echo("text");') == 'text'


def test_call_depth_limit():
    source = 'funct down(n: int): int { return down(n + 1); } print(down(0));'
    with pytest.raises(RuntimeFailure, match='Maximum call depth of 1000 exceeded in down'):
        run_program(source)


def test_call_depth_limit_is_configurable():
    source = '''
    funct depth(n: int): int { if (n == 0) { return 0; } return 1 + depth(n - 1); }
    print(depth(5));
    '''
    assert run_program(source, max_call_depth=6) == '5'
    with pytest.raises(RuntimeFailure, match='Maximum call depth of 5'):
        run_program(source, max_call_depth=5)


def test_return_unwinds_loop_inside_function():
    source = 'funct f(): int { while (true) { return 1; } return 2; } print(f());'
    assert run_program(source) == '1'


def test_deep_recursion_within_default_limit():
    source = '''
    funct s(n: int): int {
        if (n == 0) { return 0; }
        return n + s(n - 1);
    }
    print(s(200));
    print(s(900));
    '''
    assert run_program(source) == '20100\n405450'
