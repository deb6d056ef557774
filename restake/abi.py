ERC20_ABI = [
    {"type": "function", "name": "name", "stateMutability": "view", "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "symbol", "stateMutability": "view", "inputs": [], "outputs": [{"name": "", "type": "string"}]},
    {"type": "function", "name": "decimals", "stateMutability": "view", "inputs": [], "outputs": [{"name": "", "type": "uint8"}]},
    {"type": "function", "name": "balanceOf", "stateMutability": "view", "inputs": [{"name": "account", "type": "address"}], "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "allowance", "stateMutability": "view", "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}], "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "approve", "stateMutability": "nonpayable", "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}], "outputs": [{"name": "", "type": "bool"}]},
]

DEPOSIT_ABI = [
    {"type": "function", "name": "deposit", "stateMutability": "nonpayable", "inputs": [{"name": "_token", "type": "address"}, {"name": "_value", "type": "uint256"}], "outputs": []},
]

WITHDRAW_ABI = [
    {"type": "function", "name": "withdraw", "stateMutability": "nonpayable", "inputs": [{"name": "_value", "type": "uint256"}, {"name": "_addr", "type": "address"}], "outputs": []},
    {"type": "function", "name": "claim", "stateMutability": "nonpayable", "inputs": [{"name": "withdrawRequestIndex", "type": "uint256"}, {"name": "user", "type": "address"}], "outputs": []},
]
