# Contract ABI artifacts
