#!/usr/bin/env python3
"""
Juicer Simulator Control Launcher
Provides both console and web interfaces for juicer control
"""

import argparse
import asyncio
import os
import sys


def main():
    parser = argparse.ArgumentParser(
        description="Commercial Citrus Juicer Simulator Control Interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s console                 # Start console interface (default)
  %(prog)s web                     # Start web interface
  %(prog)s web --port 8080         # Start web interface on port 8080
  %(prog)s --config my.yaml web    # Use another configuration file
        """
    )

    parser.add_argument(
        'interface',
        choices=['console', 'web'],
        nargs='?',
        default='console',
        help='Interface type to launch (default: console)'
    )

    parser.add_argument(
        '--port',
        type=int,
        help='Port for web interface (default: from config, 4567)'
    )

    parser.add_argument(
        '--host',
        help='Host for web interface (default: from config, 0.0.0.0)'
    )

    parser.add_argument(
        '--config',
        help='Path to YAML configuration file (default: config.yaml or $CONFIG_PATH)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version='Juicer Simulator Control v0.1.0'
    )

    args = parser.parse_args()

    if args.config:
        os.environ["CONFIG_PATH"] = args.config

    from JuicerSim.main import load_config

    config = load_config()
    if args.host:
        config["web"]["host"] = args.host
    if args.port:
        config["web"]["port"] = args.port

    print("🍊 Commercial Citrus Juicer Simulator")
    print("=" * 40)

    if args.interface == 'console':
        from JuicerSim.console_interface import ConsoleInterface
        from JuicerSim.main import JuicerSimulator, setup_logging

        setup_logging(config["logging"]["level"])
        ConsoleInterface(JuicerSimulator(config)).run()

    elif args.interface == 'web':
        from JuicerSim.web_interface import main as web_main

        print(f"🌐 Starting Web Interface on {config['web']['host']}:{config['web']['port']}...")
        asyncio.run(web_main(config))

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        sys.exit(1)
