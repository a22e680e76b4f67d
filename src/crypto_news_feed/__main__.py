from crypto_news_feed.cli import main

raise SystemExit(main())
