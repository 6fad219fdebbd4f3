from .runner import CircuitRunner, ExecutionResult, bits_to_int, bitstring_to_bits

__all__ = ['CircuitRunner', 'ExecutionResult', 'bits_to_int', 'bitstring_to_bits']
