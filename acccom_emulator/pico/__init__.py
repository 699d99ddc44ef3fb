from .emu import PicoMIPSEmulator, PicoRegisters

__all__ = ['PicoMIPSEmulator', 'PicoRegisters']
