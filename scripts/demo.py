#!/usr/bin/env python3
"""
Demo script for the movie cache API.

Walks a running server through a read, a cached re-read and a title
update, timing each call. Nothing is deleted. Start the API first:

    python -m movie_cache.api.app
"""

import os
import sys
import time

import httpx

BASE_URL = os.getenv("API_URL", "http://localhost:3000")


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def timed(client: httpx.Client, method: str, path: str, **kwargs) -> httpx.Response:
    start = time.time()
    response = client.request(method, path, **kwargs)
    duration = (time.time() - start) * 1000
    print(f"  {method:<6} {path:<40} {response.status_code}  {duration:7.2f}ms")
    return response


def demo_list(client: httpx.Client) -> list[dict]:
    """List movies twice; the second call should come from the cache."""
    print_section("List Movies")

    movies = timed(client, "GET", "/movies").json()
    timed(client, "GET", "/movies")

    print(f"\n📋 {len(movies)} movies returned")
    for movie in movies[:3]:
        print(f"  - {movie.get('title')}")
    return movies


def demo_read_update(client: httpx.Client, movie_id: str) -> None:
    """Read and update one movie, re-reading after the update."""
    print_section(f"Movie {movie_id}")

    print("\n🔍 Read twice (miss, then hit):")
    original = timed(client, "GET", f"/movies/{movie_id}").json()
    timed(client, "GET", f"/movies/{movie_id}")

    print("\n✏️  Update title (invalidates cache):")
    new_title = f"{original.get('title')} (Director's Cut)"
    print(f"  {timed(client, 'PATCH', f'/movies/{movie_id}', json={'title': new_title}).json()}")
    updated = timed(client, "GET", f"/movies/{movie_id}").json()
    print(f"  Title now: {updated.get('title')}")

    print("\n✏️  Restore title:")
    timed(client, "PATCH", f"/movies/{movie_id}", json={"title": original.get("title")})

    print("\n🚫 Invalid id:")
    timed(client, "GET", "/movies/not-an-id")


def main() -> None:
    """Run the demo."""
    print("\n🚀 Movie Cache Demo")
    print(f"Server: {BASE_URL}")

    try:
        with httpx.Client(base_url=BASE_URL, timeout=10.0) as client:
            health = client.get("/health").json()
            print(f"Health: {health}")

            movies = demo_list(client)
            if not movies:
                print("\nNo movies in the collection, nothing more to show.")
                return

            first = movies[0]
            demo_read_update(client, first.get("id") or first.get("_id"))

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except httpx.HTTPError as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure the API is running:")
        print("  python -m movie_cache.api.app")
        sys.exit(1)


if __name__ == "__main__":
    main()
