"""
Z80 to Intel Mnemonic Translator
================================

Rewrites instructions decoded in Z80 syntax into Intel 8080/8085 syntax.
The translation depends on the operand shape, not only on the mnemonic:

    LD B, C        ->  MOV B, C
    LD B, 12h      ->  MVI B, 12h
    LD HL, 1234h   ->  LXI H, 1234h
    LD A, (8000h)  ->  LDA 8000h
    LD A, (DE)     ->  LDAX D
    INC (HL)       ->  INR M
    INC HL         ->  INX H
    ADD A, B       ->  ADD B
    ADD A, 12h     ->  ADI 12h
    ADD HL, DE     ->  DAD D
    JP NZ, 1234h   ->  JNZ 1234h
    JP (HL)        ->  PCHL
    RST 08h        ->  RST 1

Conditional jumps, calls and returns fold their condition into the
mnemonic. This is a separate transformation per mnemonic family, not a
text substitution.

A translated instruction keeps its original spelling as a "Z80: ..."
comment. Instructions that no Intel CPU can execute, and rows already
written in Intel syntax (RIM, SIM, DB), are returned unchanged.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import replace
from typing import Callable, Optional

from .instruction import Instruction, Operand, OperandKind

# Translation result: new mnemonic and operand fragments, or None to keep
Translation = Optional[tuple[str, tuple[Operand, ...]]]


# Intel register-pair names
PAIR_NAMES = {"BC": "B", "DE": "D", "HL": "H", "SP": "SP", "AF": "PSW"}

# Instructions that only change their name
SIMPLE_RENAMES = {
    "RLCA": "RLC",
    "RRCA": "RRC",
    "RLA": "RAL",
    "RRA": "RAR",
    "CPL": "CMA",
    "SCF": "STC",
    "CCF": "CMC",
    "HALT": "HLT",
}

# ALU operations: (register form, immediate form)
ALU_FORMS = {
    "ADD": ("ADD", "ADI"),
    "ADC": ("ADC", "ACI"),
    "SUB": ("SUB", "SUI"),
    "SBC": ("SBB", "SBI"),
    "AND": ("ANA", "ANI"),
    "XOR": ("XRA", "XRI"),
    "OR": ("ORA", "ORI"),
    "CP": ("CMP", "CPI"),
}

# Name-only lookup, for callers that have no operands at hand
MNEMONIC_MAP = {
    "LD": "MOV",
    "INC": "INR",
    "DEC": "DCR",
    "JP": "JMP",
    "EX": "XCHG",
    **{z80: forms[0] for z80, forms in ALU_FORMS.items()},
    **SIMPLE_RENAMES,
}


def translate_mnemonic(mnemonic: str) -> str:
    """Return the usual Intel name for a Z80 mnemonic (unchanged if none)."""
    return MNEMONIC_MAP.get(mnemonic.upper(), mnemonic)


# =============================================================================
# Operand Helpers
# =============================================================================

def _is_register(operand: Operand) -> bool:
    """8-bit register or (HL), the operands Intel writes as a register name."""
    return operand.kind == OperandKind.REGISTER or (
        operand.kind == OperandKind.INDIRECT and operand.text == "(HL)"
    )


def _register(operand: Operand) -> Operand:
    """Intel spelling of an 8-bit register operand; (HL) becomes M."""
    if operand.text == "(HL)":
        return Operand.register("M")
    return operand


def _pair(operand: Operand) -> Operand:
    return Operand.pair(PAIR_NAMES.get(operand.text, operand.text))


def _indirect_pair(operand: Operand) -> Operand:
    """(BC) -> B, (DE) -> D for LDAX/STAX."""
    return Operand.pair(PAIR_NAMES[operand.text.strip("()")])


def _is(operand: Operand, kind: OperandKind, text: Optional[str] = None) -> bool:
    return operand.kind == kind and (text is None or operand.text == text)


# =============================================================================
# Per-Mnemonic Transformations
# =============================================================================

def _translate_ld(ops: tuple[Operand, ...]) -> Translation:
    dst, src = ops
    if _is_register(dst) and _is_register(src):
        return "MOV", (_register(dst), _register(src))
    if _is_register(dst) and src.kind == OperandKind.IMMEDIATE8:
        return "MVI", (_register(dst), src)
    if dst.kind == OperandKind.REGISTER_PAIR and src.kind == OperandKind.IMMEDIATE16:
        return "LXI", (_pair(dst), src)
    if _is(dst, OperandKind.REGISTER, "A") and src.kind == OperandKind.MEMORY:
        return "LDA", (Operand.address(),)
    if dst.kind == OperandKind.MEMORY and _is(src, OperandKind.REGISTER, "A"):
        return "STA", (Operand.address(),)
    if _is(dst, OperandKind.REGISTER_PAIR, "HL") and src.kind == OperandKind.MEMORY:
        return "LHLD", (Operand.address(),)
    if dst.kind == OperandKind.MEMORY and _is(src, OperandKind.REGISTER_PAIR, "HL"):
        return "SHLD", (Operand.address(),)
    if _is(dst, OperandKind.REGISTER, "A") and src.text in ("(BC)", "(DE)"):
        return "LDAX", (_indirect_pair(src),)
    if dst.text in ("(BC)", "(DE)") and _is(src, OperandKind.REGISTER, "A"):
        return "STAX", (_indirect_pair(dst),)
    if _is(dst, OperandKind.REGISTER_PAIR, "SP") and _is(src, OperandKind.REGISTER_PAIR, "HL"):
        return "SPHL", ()
    return None


def _translate_inc_dec(mnemonic: str, ops: tuple[Operand, ...]) -> Translation:
    (operand,) = ops
    if operand.kind == OperandKind.REGISTER_PAIR:
        return ("INX" if mnemonic == "INC" else "DCX"), (_pair(operand),)
    if _is_register(operand):
        return ("INR" if mnemonic == "INC" else "DCR"), (_register(operand),)
    return None


def _translate_alu(mnemonic: str, ops: tuple[Operand, ...]) -> Translation:
    if mnemonic == "ADD" and ops and _is(ops[0], OperandKind.REGISTER_PAIR, "HL"):
        return "DAD", (_pair(ops[1]),)
    # Drop the explicit accumulator of ADD A, r / ADC A, r / SBC A, r
    if len(ops) == 2:
        if not _is(ops[0], OperandKind.REGISTER, "A"):
            return None
        ops = ops[1:]
    (source,) = ops
    register_form, immediate_form = ALU_FORMS[mnemonic]
    if source.kind == OperandKind.IMMEDIATE8:
        return immediate_form, (source,)
    if _is_register(source):
        return register_form, (_register(source),)
    return None


def _translate_conditional(prefix: str, unconditional: str) -> Callable[..., Translation]:
    """Build the JP/CALL/RET transformation folding cc into the mnemonic."""

    def translate(ops: tuple[Operand, ...]) -> Translation:
        if ops and ops[0].kind == OperandKind.CONDITION:
            return f"{prefix}{ops[0].text}", ops[1:]
        return unconditional, ops

    return translate


_translate_call = _translate_conditional("C", "CALL")
_translate_ret = _translate_conditional("R", "RET")
_translate_jp_cc = _translate_conditional("J", "JMP")


def _translate_jp(ops: tuple[Operand, ...]) -> Translation:
    if len(ops) == 1 and _is(ops[0], OperandKind.INDIRECT, "(HL)"):
        return "PCHL", ()
    return _translate_jp_cc(ops)


def _translate_rst(ops: tuple[Operand, ...], target: Optional[int]) -> Translation:
    if target is None:
        return None
    return "RST", (Operand.literal(str(target >> 3)),)


def _translate_stack(mnemonic: str, ops: tuple[Operand, ...]) -> Translation:
    return mnemonic, tuple(_pair(operand) for operand in ops)


def _translate_ex(ops: tuple[Operand, ...]) -> Translation:
    texts = tuple(operand.text for operand in ops)
    if texts == ("DE", "HL"):
        return "XCHG", ()
    if texts == ("(SP)", "HL"):
        return "XTHL", ()
    return None


def _translate_io(mnemonic: str, ops: tuple[Operand, ...]) -> Translation:
    port = next((operand for operand in ops if operand.kind == OperandKind.PORT), None)
    if port is None:
        return None
    return mnemonic, (Operand.imm8(port.value),)


def _translation_for(instruction: Instruction) -> Translation:
    mnemonic = instruction.mnemonic
    ops = instruction.operand_list

    if mnemonic in SIMPLE_RENAMES:
        return SIMPLE_RENAMES[mnemonic], ops
    if mnemonic == "LD" and len(ops) == 2:
        return _translate_ld(ops)
    if mnemonic in ("INC", "DEC") and len(ops) == 1:
        return _translate_inc_dec(mnemonic, ops)
    if mnemonic in ALU_FORMS and ops:
        return _translate_alu(mnemonic, ops)
    if mnemonic == "JP":
        return _translate_jp(ops)
    if mnemonic == "CALL":
        return _translate_call(ops)
    if mnemonic == "RET":
        return _translate_ret(ops)
    if mnemonic == "RST":
        return _translate_rst(ops, instruction.target_address)
    if mnemonic in ("PUSH", "POP"):
        return _translate_stack(mnemonic, ops)
    if mnemonic == "EX":
        return _translate_ex(ops)
    if mnemonic in ("IN", "OUT"):
        return _translate_io(mnemonic, ops)
    return None


# =============================================================================
# Public API
# =============================================================================

def translate_to_intel(instruction: Instruction) -> Instruction:
    """
    Rewrite a Z80-syntax instruction in Intel syntax.

    Args:
        instruction: Instruction decoded from an Intel opcode table, after
                     label resolution

    Returns:
        The translated instruction, with a "Z80: <original>" comment when
        the text changed, or the instruction itself when no translation
        applies.
    """
    if not (instruction.supports_8080 or instruction.supports_8085):
        return instruction

    translation = _translation_for(instruction)
    if translation is None:
        return instruction

    mnemonic, operands = translation
    translated = replace(
        instruction,
        mnemonic=mnemonic,
        operand_list=operands,
        z80_mnemonic=instruction.mnemonic,
    )
    if translated.text == instruction.text:
        return instruction
    return translated.with_comment(f"Z80: {instruction.text}")
