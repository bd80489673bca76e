"""Compile generated modules with rustc and run them against real input.

Skipped when no Rust toolchain is on PATH.
"""
import shutil
import subprocess
from pathlib import Path

import pytest

from xdrc import compile_source

RUSTC = shutil.which("rustc")
SPECS = Path(__file__).parent / "specs"

pytestmark = pytest.mark.skipif(RUSTC is None, reason="rustc not installed")

SCENARIOS = """
typedef opaque data<4>;

enum Kind { A = 0, B = 1 };
union U switch (Kind k) { case A: int x; case B: int y; };

struct Point { unsigned int x; unsigned int y; };

typedef uint32_t Inner;
typedef Inner Arr<>;

struct Node { int value; Node *next; };
"""

HARNESS = """
fn chain(_links: usize) -> ::std::vec::Vec<u8> {
    let mut _buf = ::std::vec::Vec::new();
    for _ in 0.._links {
        _buf.extend_from_slice(&[0, 0, 0, 7, 0, 0, 0, 1]);
    }
    _buf.extend_from_slice(&[0, 0, 0, 7, 0, 0, 0, 0]);
    _buf
}

fn main() {
    let _long = [0u8, 0, 0, 5, 1, 2, 3, 4, 5, 0, 0, 0];
    assert_eq!(
        <data<&[u8]> as XdrDecode>::from_xdr(&_long).err(),
        Some(XdrError::LengthExceedsBound { max: 4, actual: 5 })
    );
    let (_short, _used) = <data<&[u8]> as XdrDecode>::from_xdr(&[0, 0, 0, 3, 9, 8, 7, 0]).unwrap();
    assert_eq!((_short.0, _used), (&[9u8, 8, 7][..], 8));

    assert_eq!(U::from_xdr(&[0, 0, 0, 2, 0, 0, 0, 1]).err(), Some(XdrError::InvalidUnionDiscriminant(2)));
    assert_eq!(U::B(-1).to_xdr().unwrap(), vec![0, 0, 0, 1, 255, 255, 255, 255]);

    let _point = Point { x: 1, y: 0xffff_ffff };
    let _bytes = _point.to_xdr().unwrap();
    assert_eq!(Point::from_xdr(&_bytes).unwrap(), (_point, 8));
    assert_eq!(Point::from_xdr(&_bytes[..7]).err(), Some(XdrError::UnexpectedEof));

    assert_eq!(Arr(vec![Inner(7)]).to_xdr().unwrap(), vec![0, 0, 0, 1, 0, 0, 0, 7]);
    assert_eq!(Arr::from_xdr(&[0, 0, 0, 2, 0, 0, 0, 2, 0, 0, 0, 9]).unwrap().0, Arr(vec![Inner(2), Inner(9)]));

    assert!(Node::from_xdr(&chain(100)).is_ok());
    assert_eq!(Node::from_xdr(&chain(100_000)).err(), Some(XdrError::DepthLimitExceeded));
    let mut _cur = XdrCursor::with_max_depth(&[0, 0, 0, 7, 0, 0, 0, 1, 0, 0, 0, 7, 0, 0, 0, 0], 1);
    assert_eq!(Node::decode(&mut _cur).err(), Some(XdrError::DepthLimitExceeded));

    println!("ok");
}
"""


def rustc(src: Path, *args: str) -> None:
    result = subprocess.run([RUSTC, "--edition", "2021", *args, str(src)],
                            capture_output=True, text=True, timeout=300)
    assert result.returncode == 0, result.stderr


@pytest.mark.parametrize("spec", sorted(
    p for p in SPECS.glob("test_*.x") if not p.name.startswith("test_err_")
), ids=lambda p: p.stem)
def test_generated_module_compiles(spec, tmp_path):
    src = tmp_path / "generated.rs"
    src.write_text(compile_source(spec.read_text(), filename=spec.name))
    rustc(src, "--crate-type", "lib", "--out-dir", str(tmp_path))


def test_generated_module_runs(tmp_path):
    src = tmp_path / "scenarios.rs"
    src.write_text(compile_source(SCENARIOS, filename="scenarios.x") + HARNESS)
    exe = tmp_path / "scenarios"
    rustc(src, "-o", str(exe))
    result = subprocess.run([str(exe)], capture_output=True, text=True, timeout=60)
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "ok"
