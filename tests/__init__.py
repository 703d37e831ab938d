"""hostsweep Test Suite

Test modules:
    test_address_range — CIDR bounds, iteration, parse/format round trip
    test_icmp          — internet checksum vectors, echo encode/decode
    test_host_prober   — ICMP probe loop against a scripted fake socket
    test_port_prober   — TCP connect classification (loopback + mocks)
    test_port_parser   — --ports specs and the three-way ports input
    test_config        — duration strings and YAML configuration
    test_scanner       — sweep engine with fake probers
    test_cli           — main.py end to end with fake probers
    test_layering      — static import analysis (core / utils / main)

Run all tests:
    pytest tests/ -v

Run standalone (no pytest):
    python3 tests/run_all.py
    python3 tests/run_all.py -v       # verbose
    python3 tests/run_all.py --fast   # skip loopback socket tests
"""
