"""
Tests for jsonws.

Modules:
- test_metadata.py: Service registration and snapshots
- test_namespaces.py: namespace path helpers
- test_compiler.py: proxy compilation and emitters
- test_generated_proxy.py: generated Python proxies end to end
- test_enum_codec.py: EnumCodec accessor
- test_events.py: event subscription bookkeeping
- test_tunnel.py: RpcTunnel over HTTP and websocket
- test_loader.py: YAML/JSON service descriptions
- test_config.py: configuration
- test_cli.py: jsonws-proxy command line
"""
