"""Babel TLVs, their wire primitives, and the single-TLV packet codec."""