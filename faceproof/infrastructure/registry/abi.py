"""ABI of the face registry contract."""

FACE_REGISTRY_ABI = [
    {
        "name": "totalRegistrants",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "registrants",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "getRegistration",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "wallet", "type": "address"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "wallet", "type": "address"},
                    {"name": "faceHash", "type": "bytes32"},
                    {"name": "ipfsHash", "type": "string"},
                    {"name": "publicKey", "type": "bytes"},
                    {"name": "timestamp", "type": "uint256"},
                ],
            }
        ],
    },
    {
        "name": "register",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "wallet", "type": "address"},
            {"name": "faceHash", "type": "bytes32"},
            {"name": "ipfsHash", "type": "string"},
            {"name": "publicKey", "type": "bytes"},
        ],
        "outputs": [],
    },
]
