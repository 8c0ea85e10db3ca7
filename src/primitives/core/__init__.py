"""Ядро: исключения, протоколы, кривые, энтропия, метаданные и реестр."""
