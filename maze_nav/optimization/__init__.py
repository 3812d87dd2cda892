"""
Optimization Module
===================

Evolutionary path optimization.
"""

from .ga import (
    PathChromosome,
    FitnessCalculator,
    GAIndividual,
    GeneticOperators,
    Population,
    PopulationInitializer,
    GeneticAlgorithmSolver,
    GAResult,
    GAState,
)

__all__ = [
    'PathChromosome',
    'FitnessCalculator',
    'GAIndividual',
    'GeneticOperators',
    'Population',
    'PopulationInitializer',
    'GeneticAlgorithmSolver',
    'GAResult',
    'GAState',
]
