from pixel_filter.cli import main

raise SystemExit(main())
