#!/usr/bin/env python3
"""
acccom - AccCom Accumulator Computer Simulator CLI

Usage:
    python acccom.py <program> [--set ADDR=VALUE ...] [--interactive]
                               [--dump] [--trace] [--max-steps N]
                               [--serial URL [--baud N]] [-v | -q]
    python acccom.py --image prog.bin [--base 0x200] [--entry 0x200] ...
    python acccom.py --list

Examples:
    python acccom.py product_sum                  # X=-25
    python acccom.py prime_list --set 0x100=2 --set 0x102=30
    python acccom.py quadratic --interactive --dump
    python acccom.py pyramid --set $100=5 --serial loop://
    python acccom.py pico_sum_squares --dump --trace

Exit status: 0 normal halt, 1 machine fault / bad input, 2 internal error.
"""

import argparse
import logging
import sys
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
import serial

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from acccom_emulator import __version__
from acccom_emulator.emu import AccComEmulator
from acccom_emulator.pico import PicoMIPSEmulator
from acccom_emulator.programs import PROGRAMS
from acccom_emulator.loader import load_image, seed, input_number, parse_int, parse_assignment
from acccom_emulator.periph.sink import ConsoleSink, SerialSink
from acccom_emulator.faults import MachineFault

log = logging.getLogger('acccom')

MACHINES = {
    'acccom': AccComEmulator,
    'picomips': PicoMIPSEmulator,
}


def setup_logging(verbose: int = 0, quiet: bool = False, log_file: str = None):
    """Console logging on stderr (rich), optional DEBUG log file."""
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    console = RichHandler(
        console=Console(stderr=True),
        level=level,
        show_time=False,
        show_path=False,
    )
    handlers = [console]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        format='%(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acccom",
        description="AccCom accumulator computer simulator",
        epilog="Programs: " + ", ".join(PROGRAMS.keys()),
    )
    parser.add_argument("program", nargs="?", choices=list(PROGRAMS.keys()),
                        help="Bundled program to run")
    parser.add_argument("--image", help="Raw big-endian binary image to run instead")
    parser.add_argument("--machine", choices=list(MACHINES.keys()), default=None,
                        help="Machine for --image (default: acccom)")
    parser.add_argument("--base", default="0x200",
                        help="Load address for --image (default: 0x200)")
    parser.add_argument("--entry", default=None,
                        help="Entry address (default: program entry / image base)")
    parser.add_argument("--set", dest="assignments", action="append", default=[],
                        metavar="ADDR=VALUE",
                        help="Pre-seed a DATA cell, e.g. --set 0x100=7 (repeatable)")
    parser.add_argument("--interactive", "-i", action="store_true",
                        help="Prompt for the program's input cells")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Instruction budget before giving up")
    parser.add_argument("--trace", action="store_true",
                        help="Print an instruction trace to stderr after the run")
    parser.add_argument("--dump", action="store_true",
                        help="Dump DATA/CODE before and after the run")
    parser.add_argument("--serial", metavar="URL",
                        help="Send program output to a serial port (pyserial URL)")
    parser.add_argument("--baud", type=int, default=SerialSink.DEFAULT_BAUD,
                        help=f"Serial baud rate (default: {SerialSink.DEFAULT_BAUD})")
    parser.add_argument("--list", action="store_true",
                        help="List bundled programs and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", help="Write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"acccom {__version__}")
    return parser


def _make_sink(args, machine: str):
    """Output sink for the run, or None when the machine never prints."""
    if MACHINES[machine] is PicoMIPSEmulator:
        if args.serial:
            log.warning("--serial ignored: %s has no print opcodes", machine)
        return None
    if args.serial:
        return SerialSink.open(args.serial, args.baud)
    return ConsoleSink()


def _make_emulator(machine: str, sink):
    cls = MACHINES[machine]
    if cls is PicoMIPSEmulator:
        return cls()
    return cls(sink=sink)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet, args.log_file)

    if args.list:
        for prog in PROGRAMS.values():
            inputs = ", ".join(f"{label}@${addr:04X}" for addr, label in prog.inputs)
            print(f"{prog.name:18s} [{prog.machine}] {prog.description}"
                  + (f"  (inputs: {inputs})" if inputs else ""))
        return 0

    if not args.program and not args.image:
        parser.error("a program name or --image is required")
    if args.program and args.image:
        parser.error("give either a program name or --image, not both")
    if args.machine and not args.image:
        parser.error("--machine only applies to --image")

    if args.image:
        machine = args.machine or 'acccom'
    else:
        machine = PROGRAMS[args.program].machine

    sink = None
    try:
        sink = _make_sink(args, machine)
        emu = _make_emulator(machine, sink)

        # Load
        if args.image:
            base = parse_int(args.base)
            entry = parse_int(args.entry) if args.entry else None
            emu.image = load_image(emu.mem, args.image, base, entry)
            emu.regs.PC = emu.image.entry
            inputs = ()
        else:
            program = PROGRAMS[args.program]
            emu.load(program)
            if args.entry:
                emu.regs.PC = parse_int(args.entry)
            inputs = program.inputs
        log.debug("Machine %s, PC=$%04X", machine, emu.regs.PC)

        # Input
        seed(emu.mem, dict(parse_assignment(a) for a in args.assignments),
             encode=emu.encode_value)
        if args.interactive:
            for addr, label in inputs:
                input_number(emu.mem, addr, f"{addr:04X}: {label} = ",
                             encode=emu.encode_value)

        if args.dump:
            print(emu.dump())

        # Run
        emu.enable_trace(args.trace)
        reason = emu.run(max_steps=args.max_steps)

        if args.trace:
            print(emu.get_trace(), file=sys.stderr)
        if args.dump:
            print()
            print(emu.dump())
            print(emu.regs.display())

        if emu.fault is not None:
            print(f"\n*** {reason.value}: {emu.fault.describe()} ***", file=sys.stderr)
        elif not reason.normal:
            print(f"\n*** {reason.value} at ${emu.regs.PC:04X} after "
                  f"{emu.regs.steps} steps ***", file=sys.stderr)
        return reason.exit_code

    except (ValueError, OSError, serial.SerialException, MachineFault) as e:
        # Bad --set/--entry values, unreadable image, port errors,
        # or a program/image that does not fit in memory
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2
    finally:
        if isinstance(sink, SerialSink):
            sink.close()


if __name__ == "__main__":
    sys.exit(main())
