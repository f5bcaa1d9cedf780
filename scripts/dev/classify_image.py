"""
Send a still image to a remote classification service and print the result.
"""
import argparse
import json
import sys

import cv2

from posestream.errors import TransportError
from posestream.services.classification_client import RemoteClassificationClient

API_BASE_URL = "http://localhost:8000/api/v1"


def main():
    parser = argparse.ArgumentParser(description="Classify the pose in an image")
    parser.add_argument("image", help="Path to a JPEG/PNG image")
    parser.add_argument("--url", default=API_BASE_URL, help="Base URL of the classification service")
    args = parser.parse_args()

    image = cv2.imread(args.image)
    if image is None:
        print(f"Error: could not read image {args.image}")
        return 1

    client = RemoteClassificationClient(args.url)
    try:
        result = client.classify_image(image)
    except TransportError as e:
        print(f"Error: {e}")
        return 2

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
