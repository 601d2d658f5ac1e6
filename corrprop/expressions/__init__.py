from .symbolic import propagate_uncertainties_symbolic, PropagationResult

__all__ = ['propagate_uncertainties_symbolic', 'PropagationResult']
