# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
tests/test_decoder.py

End-to-end tests for the sample-to-packet pipeline.

Covers:
- Round trip of payloads through synthesized samples
- Chunk boundaries splitting samples
- Checksum sensitivity to single bit errors
- Oversize rejection and recovery
- Verbose diagnostics, trace records and statistics
"""

import io
import random
from unittest.mock import patch

import pytest

from pyukhasnet.core.decoder import Decoder, DiagnosticKind
from pyukhasnet.core.exceptions import OutputError, TransportError
from pyukhasnet.core.framer import SyncState
from pyukhasnet.core.framing import MAX_PAYLOAD, bytes_to_bits, frame_bits
from pyukhasnet.core.slicer import synthesize_samples
from pyukhasnet.interfaces import FileSampleSource, StreamSampleSource

# preamble (4 bytes) + sync word (2 bytes) + length byte
PAYLOAD_BIT_OFFSET = (4 + 2 + 1) * 8


def run_decoder(config, data, clock=None, chunk=None):
    decoder = Decoder(config, clock=clock) if clock else Decoder(config)
    packets, diagnostics = [], []
    decoder.register_packet_callback(packets.append)
    decoder.register_diagnostic_callback(diagnostics.append)
    if chunk:
        for i in range(0, len(data), chunk):
            decoder.feed_bytes(data[i:i + chunk])
    else:
        decoder.feed_bytes(data)
    return decoder, packets, diagnostics


def test_end_to_end_abc(config_8k, air_samples, fixed_clock):
    _, packets, _ = run_decoder(config_8k, air_samples(b"ABC"), clock=fixed_clock)
    assert len(packets) == 1
    assert packets[0].payload == b"ABC"
    assert packets[0].timestamp == fixed_clock()


@pytest.mark.parametrize("payload", [
    b"",
    b"3aT21.4[NODE1]",
    bytes(range(256))[:MAX_PAYLOAD],
])
def test_round_trip(config_8k, air_samples, payload):
    _, packets, _ = run_decoder(config_8k, air_samples(payload))
    assert [p.payload for p in packets] == [payload]


@pytest.mark.parametrize("chunk", [1, 3, 7, 4096])
def test_chunk_boundaries(config_8k, air_samples, chunk):
    _, packets, _ = run_decoder(config_8k, air_samples(b"ABC"), chunk=chunk)
    assert [p.payload for p in packets] == [b"ABC"]


def test_consecutive_packets(config_8k, air_samples):
    decoder, packets, _ = run_decoder(config_8k, air_samples(b"one", b"two", b"three"))
    assert [p.payload for p in packets] == [b"one", b"two", b"three"]
    assert decoder.stats.packets == 3
    assert decoder.stats.syncs == 3


def test_default_sample_rate(air_samples):
    decoder = Decoder()
    packets = []
    decoder.register_packet_callback(packets.append)
    decoder.feed_bytes(air_samples(b"64k", oversampling=32))
    assert [p.payload for p in packets] == [b"64k"]


@pytest.mark.parametrize("bit_index", range(24))
def test_single_bit_error_suppresses_packet(verbose_config_8k, bit_index):
    bits = frame_bits(b"ABC")
    bits[PAYLOAD_BIT_OFFSET + bit_index] ^= 1
    decoder, packets, diagnostics = run_decoder(verbose_config_8k, synthesize_samples(bits, 4))
    assert packets == []
    mismatches = [d for d in diagnostics if d.kind == DiagnosticKind.CHECKSUM_MISMATCH]
    assert len(mismatches) == 1
    assert mismatches[0].received != mismatches[0].computed
    assert "CRC mismatch: read(" in mismatches[0].message
    assert decoder.stats.checksum_errors == 1


def test_oversize_length_then_recovery(verbose_config_8k):
    bits = bytes_to_bits(b"\xaa\xaa\xaa\xaa\x2d\xaa\xff") + frame_bits(b"ok")
    decoder, packets, diagnostics = run_decoder(verbose_config_8k, synthesize_samples(bits, 4))
    assert [p.payload for p in packets] == [b"ok"]
    kinds = [d.kind for d in diagnostics]
    assert kinds == [
        DiagnosticKind.SYNC,
        DiagnosticKind.OVERSIZE,
        DiagnosticKind.SYNC,
        DiagnosticKind.LENGTH,
    ]
    assert diagnostics[1].message == "Length: 255 > 254, skip"
    assert decoder.stats.oversize == 1


def test_verbose_diagnostics(verbose_config_8k, air_samples):
    _, _, diagnostics = run_decoder(verbose_config_8k, air_samples(b"ABC"))
    assert [d.message for d in diagnostics] == ["Sync: 2DAA", "Parsing 3 bytes"]
    assert diagnostics[0].value == 0x2DAA
    assert diagnostics[1].value == 3


def test_quiet_mode_has_no_diagnostics(config_8k, air_samples):
    bits = frame_bits(b"ABC")
    bits[PAYLOAD_BIT_OFFSET] ^= 1
    _, packets, diagnostics = run_decoder(config_8k, synthesize_samples(bits, 4))
    assert packets == []
    assert diagnostics == []


def test_noise_produces_nothing(config_8k):
    rng = random.Random(1234)
    bits = [rng.randint(0, 1) for _ in range(4000)]
    decoder, packets, _ = run_decoder(config_8k, synthesize_samples(bits, 4))
    # random syncs are possible but a valid CRC is not expected
    assert packets == []
    assert decoder.stats.bits == 4000


def test_trace_records(config_8k, air_samples):
    decoder = Decoder(config_8k)
    records = []
    decoder.register_trace_callback(records.append)
    decoder.feed_bytes(air_samples(b"A"))
    assert len(records) == decoder.stats.bits
    assert records[0].sample_index == 3
    assert any(r.synced for r in records)
    assert all(-8000 < r.threshold < 8000 for r in records)


def test_failing_callback_does_not_stop_decoding(config_8k, air_samples):
    decoder = Decoder(config_8k)
    packets = []

    def broken(_):
        raise RuntimeError("consumer bug")

    decoder.register_packet_callback(broken)
    decoder.register_packet_callback(packets.append)
    decoder.feed_bytes(air_samples(b"one", b"two"))
    assert [p.payload for p in packets] == [b"one", b"two"]


def test_run_from_file(config_8k, air_samples, tmp_path):
    data = air_samples(b"file") + b"\x01"
    path = tmp_path / "capture.raw"
    path.write_bytes(data)

    decoder = Decoder(config_8k)
    packets = []
    decoder.register_packet_callback(packets.append)
    with FileSampleSource(str(path)) as source:
        stats = decoder.run(source, chunk_size=333)

    assert [p.payload for p in packets] == [b"file"]
    assert stats.samples == len(data) // 2
    assert stats.bits == stats.samples // 4
    assert stats.elapsed >= 0.0


def test_memoryview_input_across_odd_boundary(config_8k, air_samples):
    data = air_samples(b"view")
    decoder = Decoder(config_8k)
    packets = []
    decoder.register_packet_callback(packets.append)
    decoder.feed_bytes(memoryview(data)[:101])
    decoder.feed_bytes(memoryview(data)[101:])
    assert [p.payload for p in packets] == [b"view"]


def test_reset_drops_partial_packet(config_8k, air_samples):
    data = air_samples(b"first")
    decoder = Decoder(config_8k)
    packets = []
    decoder.register_packet_callback(packets.append)

    # Stop inside the payload, on an odd byte
    decoder.feed_bytes(data[:PAYLOAD_BIT_OFFSET * 4 * 2 + 9])
    assert decoder.framer.state == SyncState.SYNCED
    samples = decoder.stats.samples

    decoder.reset()
    assert decoder.slicer.threshold == 0
    assert decoder.framer.state == SyncState.SEARCHING
    assert decoder.framer.register == 0
    assert decoder._pending == b""
    assert decoder.stats.samples == samples

    decoder.feed_bytes(air_samples(b"second"))
    assert [p.payload for p in packets] == [b"second"]
    assert decoder.stats.syncs == 2


def test_output_error_stops_decoding(config_8k, air_samples):
    decoder = Decoder(config_8k)
    written = []

    def write(packet):
        if written:
            raise OutputError("stdout closed")
        written.append(packet.payload)

    decoder.register_packet_callback(write)
    with pytest.raises(OutputError):
        decoder.feed_bytes(air_samples(b"one", b"two", b"three"))
    assert written == [b"one"]
    assert decoder.stats.packets == 2


def test_output_error_from_diagnostic_callback(verbose_config_8k, air_samples):
    decoder = Decoder(verbose_config_8k)

    def write(_):
        raise OutputError("stdout closed")

    decoder.register_diagnostic_callback(write)
    with pytest.raises(OutputError):
        decoder.feed_bytes(air_samples(b"one"))
    assert decoder.stats.syncs == 1
    assert decoder.stats.packets == 0


def test_output_error_propagates_from_run(config_8k, air_samples):
    decoder = Decoder(config_8k)

    def write(_):
        raise OutputError("trace disk full")

    decoder.register_trace_callback(write)
    with StreamSampleSource(io.BytesIO(air_samples(b"one"))) as source:
        with pytest.raises(OutputError):
            decoder.run(source)
    assert decoder.stats.bits == 1


def test_run_requires_open_source(config_8k, air_samples):
    source = StreamSampleSource(io.BytesIO(air_samples(b"one")))
    with pytest.raises(TransportError):
        Decoder(config_8k).run(source)


def test_run_elapsed_uses_monotonic_clock(config_8k, air_samples):
    decoder = Decoder(config_8k)
    with patch("pyukhasnet.core.decoder.time") as clock:
        clock.monotonic.side_effect = [100.0, 102.5]
        with StreamSampleSource(io.BytesIO(air_samples(b"one"))) as source:
            stats = decoder.run(source)
    assert stats.elapsed == 2.5
    clock.time.assert_not_called()
