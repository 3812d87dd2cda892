"""
Genetic Algorithm Module
========================

GA-based maze solving with coordinate-sequence chromosomes.
"""

from .chromosome import PathChromosome
from .fitness import FitnessCalculator
from .individual import GAIndividual, GeneticOperators
from .population import Population, PopulationInitializer
from .solver import GeneticAlgorithmSolver, GAResult, GAState

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
