from fleetdns import LifecycleEvent, LifecycleState, build_engine
from fleetdns.base.config import EngineConfig



def main():
    # Example usage of the engine factory
    aws_config = {
        "aws_access_key_id": "AKIAEXAMPLE",
        "aws_secret_access_key": "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY",
        "region_name": "us-east-1",
    }
    engine = build_engine(aws_config, EngineConfig(prune=True))

    outcome = engine.reconcile(LifecycleEvent("i-0123456789abcdef0", LifecycleState.STARTING))
    print(f"Reconcile: {outcome.to_dict()}")

if __name__ == "__main__":
    main()
