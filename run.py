import os
import socket
import uvicorn


def get_lan_ip():
    try:
        # Connect to a public DNS server to determine the route
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def main():
    lan_ip = get_lan_ip()
    port = int(os.getenv("PORT", "8000"))

    print("\n" + "=" * 60)
    print("🚀 SERVER STARTING")
    print(f"📡 LAN URL:  http://{lan_ip}:{port}")
    print(f"🏠 Local:    http://127.0.0.1:{port}")
    print("-" * 60)
    print("⚠️  NOTE: TLS is expected to be terminated by the hosting platform.")
    print("    Set PARTNER_API_KEYS to seed partner keys for the demo page.")
    print("=" * 60 + "\n")

    uvicorn.run(
        "qrlogin.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("RELOAD", "0") == "1",
    )


if __name__ == "__main__":
    main()
