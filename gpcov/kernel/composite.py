# gpcov/kernel/composite.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Sums and products of kernels.

A composite kernel is filled by evaluating its first component and then
accumulating the others into the same matrix (ADD for sums, MULTIPLY
for products), so that no intermediate matrix is allocated. Its
parameter vector is the concatenation of the parameter vectors of its
components.
"""
import gpcov.num as gnp


class CompositeKernel:
    family = None

    def __init__(self, *kernels):
        if len(kernels) < 2:
            raise ValueError(f"{type(self).__name__} needs at least two kernels")
        components = []
        for k in kernels:
            # (k1 + k2) + k3 is flattened into one sum
            if type(k) is type(self):
                components.extend(k.components)
            else:
                components.append(k)
        self.components = components

    def leaves(self):
        """Stationary kernels found in the composition tree, depth first."""
        for k in self.components:
            if isinstance(k, CompositeKernel):
                yield from k.leaves()
            else:
                yield k

    def num_params(self) -> int:
        return sum(k.num_params() for k in self.components)

    def get_params(self):
        return gnp.concatenate([gnp.asarray(k.get_params()) for k in self.components])

    def set_params(self, params):
        params = gnp.asarray(params).reshape(-1)
        if params.shape[0] != self.num_params():
            raise ValueError(
                f"{type(self).__name__} expects {self.num_params()} parameters, "
                f"got {params.shape[0]}"
            )
        start = 0
        for k in self.components:
            stop = start + k.num_params()
            k.set_params(params[start:stop])
            start = stop

    def param_names(self):
        return [
            f"k{i}.{name}"
            for i, k in enumerate(self.components)
            for name in k.param_names()
        ]

    def check_param_index(self, p: int):
        if not 0 <= p < self.num_params():
            raise IndexError(
                f"parameter index {p} out of range for {type(self).__name__} "
                f"with {self.num_params()} parameters"
            )

    def param_owner(self, p: int):
        """Return (component index, parameter index within the component)."""
        self.check_param_index(p)
        for i, k in enumerate(self.components):
            m = k.num_params()
            if p < m:
                return i, p
            p -= m

    def reduce(self, values):
        raise NotImplementedError

    def __add__(self, other):
        return SumKernel(self, other)

    def __mul__(self, other):
        return ProductKernel(self, other)

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(repr(k) for k in self.components)})"


class SumKernel(CompositeKernel):
    """k(x, y) = k_1(x, y) + ... + k_m(x, y)."""

    def reduce(self, values):
        out = values[0]
        for v in values[1:]:
            out = out + v
        return out


class ProductKernel(CompositeKernel):
    """k(x, y) = k_1(x, y) * ... * k_m(x, y)."""

    def reduce(self, values):
        out = values[0]
        for v in values[1:]:
            out = out * v
        return out
