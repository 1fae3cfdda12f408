import threading

from librestock.scanner import FrameDecoderScanner, ManualEntryScanner, SimulatedScanner, ean13_check_digit


def test_manual_entry_forwards_trimmed_text():
    scanner = ManualEntryScanner()
    seen = []
    cancel = scanner.start_scan(seen.append, lambda exc: None)

    assert scanner.submit("  9788420412146 ") == "9788420412146"
    assert scanner.submit("   ") is None
    cancel()
    scanner.submit("12345678")

    assert seen == ["9788420412146"]


def test_frame_decoder_reports_first_detection():
    frames = [b"blur", b"blur", b"code:12345678", b"code:99999999"]
    done = threading.Event()
    seen = []

    def decode(frame):
        return frame.decode()[5:] if frame.startswith(b"code:") else None

    def on_detected(text):
        seen.append(text)
        done.set()

    scanner = FrameDecoderScanner(frames, decode)
    scanner.start_scan(on_detected, lambda exc: None)
    assert done.wait(2)
    scanner.join(2)
    assert seen == ["12345678"]


def test_frame_decoder_reports_errors():
    errors = []

    def decode(frame):
        raise RuntimeError("camera unplugged")

    scanner = FrameDecoderScanner([b"frame"], decode)
    scanner.start_scan(lambda text: None, errors.append)
    scanner.join(2)
    assert len(errors) == 1 and str(errors[0]) == "camera unplugged"


def test_cancel_stops_before_detection():
    gate = threading.Event()
    seen = []

    def frames():
        gate.wait(2)
        yield b"anything"

    scanner = FrameDecoderScanner(frames(), lambda frame: "12345678")
    cancel = scanner.start_scan(seen.append, lambda exc: None)
    cancel()
    gate.set()
    scanner.join(2)
    assert seen == []


def test_simulated_scanner_emits_valid_ean13():
    seen = []
    SimulatedScanner().start_scan(seen.append, lambda exc: None)
    code = seen[0]
    assert len(code) == 13 and code.isdigit()
    assert int(code[-1]) == ean13_check_digit(code[:12])


def test_ean13_check_digit_known_value():
    assert ean13_check_digit("978842041214") == 6


def test_frame_decoder_skips_blank_decodes():
    done = threading.Event()
    seen = []

    def on_detected(text):
        seen.append(text)
        done.set()

    results = iter(["   ", "", None, " 9788420412146\n"])
    scanner = FrameDecoderScanner([b"a", b"b", b"c", b"d"], lambda frame: next(results))
    scanner.start_scan(on_detected, lambda exc: None)
    assert done.wait(2)
    scanner.join(2)
    assert seen == ["9788420412146"]
