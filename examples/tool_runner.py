"""
Lightweight MCP tool runner for chuk-mcp-maps.

Runs tools through the server's dispatcher without the HTTP transport,
so arguments are validated exactly as they would be for a real client.
Uses OpenStreetMap, which needs no API key.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from chuk_mcp_maps.async_server import create_server


class ToolRunner:
    """Run map tools directly against the configured provider."""

    def __init__(self, provider: str = "osm", **keys: Any):
        self.mcp, self.maps = create_server(provider=provider, **keys)

    @property
    def tool_names(self) -> list[str]:
        return [t.name for t in self.mcp.get_tools()]

    async def run(self, tool_name: str, **arguments) -> dict:
        """Run a tool and return parsed JSON result."""
        result = await self.mcp.dispatcher.dispatch(tool_name, arguments)
        text = result.content[0].text
        if result.is_error:
            raise RuntimeError(text)
        return json.loads(text)

    async def run_text(self, tool_name: str, **arguments) -> str:
        """Run a tool and return text output."""
        result = await self.mcp.dispatcher.dispatch(tool_name, {**arguments, "output_mode": "text"})
        return result.content[0].text

    async def close(self) -> None:
        await self.mcp.close()


async def main():
    """Demo: exercise the map tools against OpenStreetMap."""
    runner = ToolRunner()
    print(f"Available tools ({len(runner.tool_names)}): {runner.tool_names}\n")

    try:
        print("=" * 60)
        print("1. maps_geocode")
        print("=" * 60)
        result = await runner.run("maps_geocode", address="Boulder, Colorado")
        print(f"  {result['formatted_address']}")
        print(f"    {result['location']}")
        print()

        print("=" * 60)
        print("2. maps_reverse_geocode")
        print("=" * 60)
        print(await runner.run_text("maps_reverse_geocode", latitude=48.8566, longitude=2.3522))
        print()

        print("=" * 60)
        print("3. search_nearby")
        print("=" * 60)
        result = await runner.run(
            "search_nearby",
            center={"value": "40.0150,-105.2705", "isCoordinates": True},
            keyword="cafe",
            radius=800,
        )
        for place in result["places"][:5]:
            print(f"  {place['name']} ({place['distance_m']:.0f}m)")
        print()

        print("=" * 60)
        print("4. maps_distance_matrix")
        print("=" * 60)
        print(
            await runner.run_text(
                "maps_distance_matrix",
                origins=["Boulder, Colorado"],
                destinations=["Denver, Colorado", "Golden, Colorado"],
            )
        )
        print()

        print("=" * 60)
        print("5. maps_directions")
        print("=" * 60)
        result = await runner.run(
            "maps_directions", origin="Boulder, Colorado", destination="Denver, Colorado"
        )
        print(f"  {result['message']}")
        for step in result["steps"][:5]:
            print(f"    {step}")
        print()

        print("=" * 60)
        print("6. maps_elevation")
        print("=" * 60)
        print(
            await runner.run_text(
                "maps_elevation",
                locations=[
                    {"latitude": 40.0150, "longitude": -105.2705},
                    {"latitude": 39.7392, "longitude": -104.9903},
                ],
            )
        )
        print()

        print("=" * 60)
        print("7. maps_status")
        print("=" * 60)
        print(await runner.run_text("maps_status"))
    finally:
        await runner.close()


if __name__ == "__main__":
    asyncio.run(main())
