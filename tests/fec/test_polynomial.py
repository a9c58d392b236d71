from meshxt.fec.polynomial import (
    poly_add,
    poly_eval,
    poly_formal_derivative,
    poly_mul,
    poly_scale,
    poly_trim,
)


def test_multiply_and_evaluate_roots():
    # (x + 2)(x + 3) = x^2 + (2 ^ 3)x + 2*3
    product = poly_mul([1, 2], [1, 3])
    assert product == [1, 1, 6]
    assert poly_eval(product, 2) == 0
    assert poly_eval(product, 3) == 0
    assert poly_eval(product, 0) == 6


def test_add_aligns_lowest_degree():
    assert poly_add([1, 2], [5, 3, 4]) == [5, 2, 6]
    assert poly_add([7, 7], [7, 7]) == [0, 0]


def test_scale():
    assert poly_scale([1, 2, 3], 1) == [1, 2, 3]
    assert poly_scale([1, 2, 3], 0) == [0, 0, 0]
    assert poly_scale([1, 2], 2) == [2, 4]


def test_formal_derivative_keeps_odd_terms():
    # d/dx (5x^3 + 7x^2 + 9x + 11) = 5x^2 + 9 in characteristic 2.
    assert poly_formal_derivative([5, 7, 9, 11]) == [5, 0, 9]
    assert poly_formal_derivative([4, 1]) == [4]
    assert poly_formal_derivative([3]) == [0]


def test_trim():
    assert poly_trim([0, 0, 3, 1]) == [3, 1]
    assert poly_trim([0]) == [0]
    assert poly_trim([0, 0]) == [0]
