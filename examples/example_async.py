"""
Example: Async Bridge API Client Usage

This example shows how to use the async Bridge client for concurrent
control-plane calls. Credentials are read from APPLICATION_ID and
APPLICATION_SECRET (or API_KEY).
"""

import asyncio

from bridge_api_sdk import (
    AsyncBridgeApiClient,
    BridgeApiClientConfiguration,
    create_auth_config_from_env,
)


async def main():
    """Main async example."""

    auth = create_auth_config_from_env()
    config = BridgeApiClientConfiguration.from_env(immediate_login=True)

    # the access token is revoked when the block exits
    async with AsyncBridgeApiClient(auth_config=auth, config=config) as client:

        # Example 1: Get account and teams concurrently, one token exchange
        print("Fetching account and teams concurrently...")
        account, teams = await asyncio.gather(
            client.get_account(),
            client.get_teams(),
        )

        print(f"Account: {account.email}")
        print(f"Teams: {[team.name for team in teams]}")

        # Example 2: Status of every cluster
        print("\nFetching cluster status...")
        clusters = await client.list_clusters()
        statuses = await asyncio.gather(
            *[client.get_cluster_status(cluster.cluster_id) for cluster in clusters]
        )

        for cluster, status in zip(clusters, statuses):
            print(f"  {cluster.name}: {status.state.value}")

    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main())
