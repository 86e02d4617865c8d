"""Nposelect - an offline simulator of NPoS validator elections.

Nominated Proof-of-Stake chains select their active validator set from
candidates backed by nominators' stake. Nposelect reproduces that election
offline so that its outcome can be studied and what-if scenarios tried
without touching any chain.

An election simulation consists of the following:

-   The input state: candidates with their self-stake and nominators with
    their stake and approved targets, held by the ``dataset`` module. It can
    be loaded from JSON snapshots with the :mod:`io` subpackage or generated
    with the ``generate`` module.
-   The configuration, from the ``config`` module, naming the algorithm and
    the size of the active set, possibly with hypothetical changes to the
    input from the ``overrides`` module.
-   The algorithm that determines who is elected and how the stake backs the
    winners. This is the task of the ``evaluate`` subpackage, which contains
    sequential Phragmén and PhragMMS, and of the stake balancing in
    ``component``.

The :class:`ElectionEngine` from the ``engine`` module composes these into
a validated :class:`ElectionResult`, which the ``measure`` and
``diagnostics`` modules can score and explain.
"""
